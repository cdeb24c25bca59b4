"""scim-provision: command-line provisioning client for SCIM 1.0 directories.

Resolves users, groups and roles by name, creates and patches them, manages
group and role membership, and grants application entitlements through the
service's bulk entitlement API.
"""

__version__ = "0.1.0"
