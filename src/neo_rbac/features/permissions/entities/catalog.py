"""Static permission catalog.

The catalog is closed: every permission key that may appear on a role is
listed here, grouped by category. It is seeded into the ``permissions`` table
once at bootstrap and is not extended at runtime.
"""

from typing import Dict, FrozenSet, Iterable, List, Optional, Tuple

from ....core.exceptions import InvalidPermissionError
from .permission import Permission


PERMISSION_CATALOG: Tuple[Permission, ...] = (
    # Billing & Subscription (9)
    Permission("canChangePlans", "Change Plans", "billing", "Change subscription plan"),
    Permission("canManageLicenses", "Manage Licenses", "billing", "Manage license seats"),
    Permission("canManagePayment", "Manage Payment", "billing", "Manage payment methods"),
    Permission("canViewInvoices", "View Invoices", "billing", "View billing invoices"),
    Permission("canCancelSubscription", "Cancel Subscription", "billing", "Cancel subscription", requires_mfa=True, is_critical=True),
    Permission("canUpdateBillingInfo", "Update Billing Info", "billing", "Update billing information"),
    Permission("canViewBillingOverview", "View Billing Overview", "billing", "View billing overview"),
    Permission("canViewTeamResources", "View Team Resources", "billing", "View team resource usage"),
    Permission("canViewPaymentBilling", "View Payment Billing", "billing", "View payment and billing"),

    # User Management (4)
    Permission("canManageUsers", "Manage Users", "users", "Full user management"),
    Permission("canInviteUsers", "Invite Users", "users", "Invite new users"),
    Permission("canDeleteUsers", "Delete Users", "users", "Delete users", is_critical=True),
    Permission("canViewUsers", "View Users", "users", "View user list"),

    # Roles & Permissions (3)
    Permission("canManageRoles", "Manage Roles", "roles", "Create/edit/delete roles"),
    Permission("canViewRoles", "View Roles", "roles", "View roles"),
    Permission("canAssignRoles", "Assign Roles", "roles", "Assign roles to users"),

    # Organization Settings (3)
    Permission("canManageTenantSettings", "Manage Tenant Settings", "organization", "Manage org settings"),
    Permission("canViewTenantSettings", "View Tenant Settings", "organization", "View org settings"),
    Permission("canDeleteTenant", "Delete Tenant", "organization", "Delete organization", requires_mfa=True, is_critical=True),

    # Secrets & Environment Variables (5)
    Permission("canManageSecrets", "Manage Secrets", "secrets", "Create/edit secrets"),
    Permission("canViewSecrets", "View Secrets", "secrets", "View secret values"),
    Permission("canManageTemplates", "Manage Templates", "secrets", "Manage env templates"),
    Permission("canRotateSecrets", "Rotate Secrets", "secrets", "Rotate secrets"),
    Permission("canExportSecrets", "Export Secrets", "secrets", "Export secrets", requires_mfa=True, is_critical=True),

    # Webhooks (4)
    Permission("canManageWebhooks", "Manage Webhooks", "webhooks", "Create/edit/delete webhooks"),
    Permission("canViewWebhooks", "View Webhooks", "webhooks", "View webhooks"),
    Permission("canTestWebhooks", "Test Webhooks", "webhooks", "Test webhook delivery"),
    Permission("canViewWebhookLogs", "View Webhook Logs", "webhooks", "View webhook logs"),

    # Cloud Provider Accounts (2)
    Permission("canManageCloudProviders", "Manage Cloud Providers", "cloud", "Manage provider accounts"),
    Permission("canViewCloudProviders", "View Cloud Providers", "cloud", "View provider accounts"),

    # Notifications (1)
    Permission("canManageNotifications", "Manage Notifications", "notifications", "Manage notification settings"),

    # Servers & Compute (10)
    Permission("canViewServers", "View Servers", "servers", "View server list"),
    Permission("canCreateServers", "Create Servers", "servers", "Create new servers"),
    Permission("canManageServers", "Manage Servers", "servers", "Manage server settings"),
    Permission("canDeleteServers", "Delete Servers", "servers", "Delete servers", is_critical=True),
    Permission("canStartStopServers", "Start/Stop Servers", "servers", "Start/stop servers"),
    Permission("canResizeServers", "Resize Servers", "servers", "Resize servers"),
    Permission("canRebuildServers", "Rebuild Servers", "servers", "Rebuild servers", is_critical=True),
    Permission("canAccessConsole", "Access Console", "servers", "Access server console"),
    Permission("canManageSSHKeys", "Manage SSH Keys", "servers", "Manage SSH keys"),
    Permission("canViewServerMetrics", "View Server Metrics", "servers", "View server metrics"),

    # Volumes & Storage (7)
    Permission("canViewVolumes", "View Volumes", "volumes", "View volumes"),
    Permission("canCreateVolumes", "Create Volumes", "volumes", "Create volumes"),
    Permission("canManageVolumes", "Manage Volumes", "volumes", "Manage volumes"),
    Permission("canDeleteVolumes", "Delete Volumes", "volumes", "Delete volumes", is_critical=True),
    Permission("canAttachVolumes", "Attach Volumes", "volumes", "Attach/detach volumes"),
    Permission("canResizeVolumes", "Resize Volumes", "volumes", "Resize volumes"),
    Permission("canSnapshotVolumes", "Snapshot Volumes", "volumes", "Create snapshots"),

    # Networks (6)
    Permission("canViewNetworks", "View Networks", "networks", "View networks"),
    Permission("canCreateNetworks", "Create Networks", "networks", "Create networks"),
    Permission("canManageNetworks", "Manage Networks", "networks", "Manage networks"),
    Permission("canDeleteNetworks", "Delete Networks", "networks", "Delete networks", is_critical=True),
    Permission("canAttachNetworks", "Attach Networks", "networks", "Attach to servers"),
    Permission("canConfigureVPN", "Configure VPN", "networks", "Configure VPN"),

    # Firewalls & Security (6)
    Permission("canViewFirewalls", "View Firewalls", "firewalls", "View firewalls"),
    Permission("canCreateFirewalls", "Create Firewalls", "firewalls", "Create firewalls"),
    Permission("canManageFirewalls", "Manage Firewalls", "firewalls", "Manage firewall rules"),
    Permission("canDeleteFirewalls", "Delete Firewalls", "firewalls", "Delete firewalls", is_critical=True),
    Permission("canApplyFirewalls", "Apply Firewalls", "firewalls", "Apply to servers"),
    Permission("canViewSecurityLogs", "View Security Logs", "firewalls", "View security logs"),

    # Load Balancers (7)
    Permission("canViewLoadBalancers", "View Load Balancers", "loadbalancers", "View load balancers"),
    Permission("canCreateLoadBalancers", "Create Load Balancers", "loadbalancers", "Create load balancers"),
    Permission("canManageLoadBalancers", "Manage Load Balancers", "loadbalancers", "Manage load balancers"),
    Permission("canDeleteLoadBalancers", "Delete Load Balancers", "loadbalancers", "Delete load balancers", is_critical=True),
    Permission("canConfigureHealthChecks", "Configure Health Checks", "loadbalancers", "Configure health checks"),
    Permission("canManageBackends", "Manage Backends", "loadbalancers", "Manage backends"),
    Permission("canConfigureSSL", "Configure SSL", "loadbalancers", "Configure SSL"),

    # DNS Management (6)
    Permission("canViewDNSZones", "View DNS Zones", "dns", "View DNS zones"),
    Permission("canCreateDNSZones", "Create DNS Zones", "dns", "Create DNS zones"),
    Permission("canManageDNSRecords", "Manage DNS Records", "dns", "Manage DNS records"),
    Permission("canDeleteDNSZones", "Delete DNS Zones", "dns", "Delete DNS zones", is_critical=True),
    Permission("canImportDNSZones", "Import DNS Zones", "dns", "Import DNS zones"),
    Permission("canExportDNSZones", "Export DNS Zones", "dns", "Export DNS zones"),

    # Snapshots & Backups (6)
    Permission("canViewSnapshots", "View Snapshots", "snapshots", "View snapshots"),
    Permission("canCreateSnapshots", "Create Snapshots", "snapshots", "Create snapshots"),
    Permission("canDeleteSnapshots", "Delete Snapshots", "snapshots", "Delete snapshots"),
    Permission("canRestoreSnapshots", "Restore Snapshots", "snapshots", "Restore from snapshot"),
    Permission("canTransferSnapshots", "Transfer Snapshots", "snapshots", "Transfer snapshots"),
    Permission("canScheduleBackups", "Schedule Backups", "snapshots", "Schedule backups"),

    # Floating IPs (4)
    Permission("canViewFloatingIPs", "View Floating IPs", "floatingips", "View floating IPs"),
    Permission("canCreateFloatingIPs", "Create Floating IPs", "floatingips", "Create floating IPs"),
    Permission("canDeleteFloatingIPs", "Delete Floating IPs", "floatingips", "Delete floating IPs"),
    Permission("canAssignFloatingIPs", "Assign Floating IPs", "floatingips", "Assign floating IPs"),

    # AI Components (11)
    Permission("canViewAIComponents", "View AI Components", "ai", "View AI components"),
    Permission("canViewAIAgents", "View AI Agents", "ai", "View AI agents"),
    Permission("canViewNodes", "View Nodes", "ai", "View nodes"),
    Permission("canViewTemplates", "View Templates", "ai", "View templates"),
    Permission("canCreateAIComponents", "Create AI Components", "ai", "Create AI components"),
    Permission("canEditAIComponents", "Edit AI Components", "ai", "Edit AI components"),
    Permission("canDeleteAIComponents", "Delete AI Components", "ai", "Delete AI components", is_critical=True),
    Permission("canDeployAIComponents", "Deploy AI Components", "ai", "Deploy AI components"),
    Permission("canTrainModels", "Train Models", "ai", "Train models"),
    Permission("canAccessAIAPI", "Access AI API", "ai", "Access AI API"),
    Permission("canViewAIMetrics", "View AI Metrics", "ai", "View AI metrics"),

    # Workflows & Automation (6)
    Permission("canManageWorkflows", "Manage Workflows", "workflows", "Manage workflows"),
    Permission("canViewWorkflows", "View Workflows", "workflows", "View workflows"),
    Permission("canExecuteWorkflows", "Execute Workflows", "workflows", "Execute workflows"),
    Permission("canScheduleWorkflows", "Schedule Workflows", "workflows", "Schedule workflows"),
    Permission("canViewWorkflowLogs", "View Workflow Logs", "workflows", "View workflow logs"),
    Permission("canDebugWorkflows", "Debug Workflows", "workflows", "Debug workflows"),

    # Monitoring & Observability (6)
    Permission("canViewDashboards", "View Dashboards", "monitoring", "View dashboards"),
    Permission("canCreateDashboards", "Create Dashboards", "monitoring", "Create dashboards"),
    Permission("canViewLogs", "View Logs", "monitoring", "View logs"),
    Permission("canExportLogs", "Export Logs", "monitoring", "Export logs"),
    Permission("canConfigureAlerts", "Configure Alerts", "monitoring", "Configure alerts"),
    Permission("canViewAuditLogs", "View Audit Logs", "monitoring", "View audit logs"),

    # Documentation (4)
    Permission("canViewDocumentation", "View Documentation", "documentation", "View documentation"),
    Permission("canEditDocumentation", "Edit Documentation", "documentation", "Edit documentation"),
    Permission("canPublishDocumentation", "Publish Documentation", "documentation", "Publish documentation"),
    Permission("canManageDocVersions", "Manage Doc Versions", "documentation", "Manage doc versions"),

    # Groups & Teams (8)
    Permission("canViewGroups", "View Groups", "groups", "View groups and teams"),
    Permission("canCreateGroups", "Create Groups", "groups", "Create new groups and teams"),
    Permission("canManageGroups", "Manage Groups", "groups", "Edit group settings and details"),
    Permission("canDeleteGroups", "Delete Groups", "groups", "Delete groups permanently", is_critical=True),
    Permission("canManageGroupMembers", "Manage Group Members", "groups", "Add and remove group members"),
    Permission("canAssignGroupResources", "Assign Group Resources", "groups", "Assign resources to groups"),
    Permission("canViewGroupResources", "View Group Resources", "groups", "View resources assigned to groups"),
    Permission("canManageGroupSettings", "Manage Group Settings", "groups", "Manage group configuration and settings"),
)

_BY_KEY: Dict[str, Permission] = {p.key: p for p in PERMISSION_CATALOG}

ALL_PERMISSION_KEYS: FrozenSet[str] = frozenset(_BY_KEY)

MFA_REQUIRED_PERMISSIONS: FrozenSet[str] = frozenset(
    p.key for p in PERMISSION_CATALOG if p.requires_mfa
)

CRITICAL_PERMISSIONS: FrozenSet[str] = frozenset(
    p.key for p in PERMISSION_CATALOG if p.is_critical
)


def get_permission(key: str) -> Optional[Permission]:
    """Look up a catalog entry by key."""
    return _BY_KEY.get(key)


def get_permissions_by_category() -> Dict[str, List[Permission]]:
    """Group catalog entries by category, preserving catalog order."""
    grouped: Dict[str, List[Permission]] = {}
    for permission in PERMISSION_CATALOG:
        grouped.setdefault(permission.category, []).append(permission)
    return grouped


def validate_permission_keys(keys: Iterable[str]) -> FrozenSet[str]:
    """Validate keys against the catalog and return them as a frozenset.

    Raises:
        InvalidPermissionError: listing every key not present in the catalog
    """
    requested = frozenset(keys)
    invalid = requested - ALL_PERMISSION_KEYS
    if invalid:
        raise InvalidPermissionError(invalid)
    return requested


def requires_mfa(keys: Iterable[str]) -> bool:
    """True if any of the keys requires MFA."""
    return any(key in MFA_REQUIRED_PERMISSIONS for key in keys)


def critical_permissions(keys: Iterable[str]) -> FrozenSet[str]:
    """Subset of the keys flagged as critical."""
    return frozenset(keys) & CRITICAL_PERMISSIONS
