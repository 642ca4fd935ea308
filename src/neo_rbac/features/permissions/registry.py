"""
Permission registry with the predefined permission nodes of the platform.

Every module also contributes its ``<module>.*`` wildcard so that a role can
be granted a whole module.
"""

from typing import Dict, List

from ...config.constants import PermissionTokens
from .entities import Permission


PERMISSION_NODES: List[Dict[str, str]] = [
    # Projects
    {'code': 'projects.view', 'description': 'View projects'},
    {'code': 'projects.create', 'description': 'Create projects'},
    {'code': 'projects.edit', 'description': 'Edit project details'},
    {'code': 'projects.delete', 'description': 'Delete projects'},
    {'code': 'projects.assign', 'description': 'Assign members to projects'},
    {'code': 'projects.view_budget', 'description': 'View project budgets'},

    # Designs
    {'code': 'designs.view', 'description': 'View design files'},
    {'code': 'designs.upload', 'description': 'Upload design files'},
    {'code': 'designs.delete', 'description': 'Delete design files'},
    {'code': 'designs.approve', 'description': 'Approve designs'},
    {'code': 'designs.freeze', 'description': 'Freeze approved designs'},
    {'code': 'designs.comment', 'description': 'Comment on designs'},

    # Bill of quantities
    {'code': 'boq.view', 'description': 'View bills of quantities'},
    {'code': 'boq.create', 'description': 'Create bill of quantities items'},
    {'code': 'boq.edit', 'description': 'Edit bill of quantities items'},
    {'code': 'boq.delete', 'description': 'Delete bill of quantities items'},
    {'code': 'boq.import', 'description': 'Import bills of quantities'},

    # Proposals
    {'code': 'proposals.view', 'description': 'View proposals'},
    {'code': 'proposals.create', 'description': 'Create proposals'},
    {'code': 'proposals.send', 'description': 'Send proposals to clients'},
    {'code': 'proposals.approve', 'description': 'Approve proposals'},
    {'code': 'proposals.reject', 'description': 'Reject proposals'},
    {'code': 'proposals.delete', 'description': 'Delete proposals'},

    # Purchase orders
    {'code': 'orders.view', 'description': 'View purchase orders'},
    {'code': 'orders.create', 'description': 'Create purchase orders'},
    {'code': 'orders.edit', 'description': 'Edit purchase orders'},
    {'code': 'orders.delete', 'description': 'Delete purchase orders'},

    # Invoices
    {'code': 'invoices.view', 'description': 'View invoices'},
    {'code': 'invoices.create', 'description': 'Create invoices'},
    {'code': 'invoices.edit', 'description': 'Edit invoices'},
    {'code': 'invoices.approve', 'description': 'Approve invoices'},
    {'code': 'invoices.delete', 'description': 'Delete invoices'},

    # Payments
    {'code': 'payments.view', 'description': 'View payments'},
    {'code': 'payments.create', 'description': 'Record payments'},
    {'code': 'payments.edit', 'description': 'Edit payments'},
    {'code': 'payments.delete', 'description': 'Delete payments'},

    # Suppliers
    {'code': 'suppliers.view', 'description': 'View suppliers'},
    {'code': 'suppliers.create', 'description': 'Create suppliers'},

    # Inventory
    {'code': 'inventory.view', 'description': 'View inventory'},
    {'code': 'inventory.add', 'description': 'Add inventory items'},
    {'code': 'inventory.approve', 'description': 'Approve inventory entries'},
    {'code': 'inventory.approve_bill', 'description': 'Approve inventory bills'},
    {'code': 'inventory.reject_bill', 'description': 'Reject inventory bills'},
    {'code': 'inventory.resubmit_bill', 'description': 'Resubmit rejected inventory bills'},

    # Work progress updates
    {'code': 'updates.view', 'description': 'View work progress updates'},
    {'code': 'updates.create', 'description': 'Post work progress updates'},

    # Site logs
    {'code': 'site_logs.view', 'description': 'View site logs'},
    {'code': 'site_logs.create', 'description': 'Create site logs'},
    {'code': 'site_logs.edit', 'description': 'Edit site logs'},
    {'code': 'site_logs.delete', 'description': 'Delete site logs'},

    # Snags
    {'code': 'snags.view', 'description': 'View snags'},
    {'code': 'snags.create', 'description': 'Report snags'},
    {'code': 'snags.resolve', 'description': 'Resolve snags'},
    {'code': 'snags.verify', 'description': 'Verify resolved snags'},

    # Finance
    {'code': 'finance.view', 'description': 'View finance dashboards'},

    # User management
    {'code': 'users.view', 'description': 'View users'},
    {'code': 'users.create', 'description': 'Create users'},
    {'code': 'users.edit', 'description': 'Edit users'},
    {'code': 'users.delete', 'description': 'Delete users'},
    {'code': 'users.manage_roles', 'description': 'Assign and manage user roles'},

    # Settings
    {'code': 'settings.view', 'description': 'View organization settings'},
    {'code': 'settings.edit', 'description': 'Edit organization settings'},
    {'code': 'settings.workflows', 'description': 'Configure approval workflows'},

    # Tasks
    {'code': 'tasks.view', 'description': 'View tasks'},
    {'code': 'tasks.create', 'description': 'Create tasks'},
    {'code': 'tasks.edit', 'description': 'Edit tasks'},
    {'code': 'tasks.bulk', 'description': 'Bulk-edit tasks'},

    # Office expenses
    {'code': 'office_expenses.view', 'description': 'View office expenses'},
    {'code': 'office_expenses.create', 'description': 'Submit office expenses'},
    {'code': 'office_expenses.approve', 'description': 'Approve office expenses'},
    {'code': 'office_expenses.delete', 'description': 'Delete office expenses'},

    # Attendance and leave
    {'code': 'attendance.view', 'description': 'View attendance'},
    {'code': 'attendance.log', 'description': 'Log attendance'},
    {'code': 'leaves.view', 'description': 'View leave requests'},
    {'code': 'leaves.apply', 'description': 'Apply for leave'},
    {'code': 'leaves.approve', 'description': 'Approve leave requests'},

    # Payroll
    {'code': 'payroll.view', 'description': 'View payroll'},
    {'code': 'payroll.manage', 'description': 'Run and manage payroll'},
    {'code': 'payroll.config', 'description': 'Configure payroll rules'},
]


# Standard access granted to the seeded Employee role
DEFAULT_EMPLOYEE_PERMISSIONS: List[str] = [
    'projects.view', 'projects.create', 'projects.edit',
    'boq.view', 'boq.edit',
    'inventory.view', 'inventory.add',
    'designs.view', 'designs.upload',
    'snags.view', 'snags.create', 'snags.resolve',
    'users.view',
]


def get_registry_modules() -> List[str]:
    """Modules named by the registry, in declaration order."""
    modules: List[str] = []
    for node in PERMISSION_NODES:
        module = node['code'].split(PermissionTokens.SEPARATOR, 1)[0]
        if module not in modules:
            modules.append(module)
    return modules


def get_registry_permissions(include_wildcards: bool = True) -> List[Permission]:
    """Build catalog entries for every registry node.

    Args:
        include_wildcards: Also emit one ``<module>.*`` entry per module

    Returns:
        Permission entities without ids
    """
    permissions = [
        Permission.from_code(node['code'], description=node['description'])
        for node in PERMISSION_NODES
    ]

    if include_wildcards:
        for module in get_registry_modules():
            permissions.append(
                Permission.from_code(
                    f"{module}{PermissionTokens.MODULE_WILDCARD_SUFFIX}",
                    description=f"All {module.replace('_', ' ')} permissions"
                )
            )

    return permissions


def get_registry_codes(include_wildcards: bool = True) -> List[str]:
    """Codes of every registry permission."""
    return [permission.code.value for permission in get_registry_permissions(include_wildcards)]
