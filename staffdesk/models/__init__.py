"""
Database models
"""
from staffdesk.models.profile import Profile, Role, MANAGER_ROLES
from staffdesk.models.salary import SalaryInfo
from staffdesk.models.attendance import Attendance, AttendanceStatus
from staffdesk.models.suspension import Suspension, SuspensionStatus, SUSPENSION_TRANSITIONS
from staffdesk.models.project import Project, ProjectStatus
from staffdesk.models.task import Task, TaskStatus, TaskPriority, TaskMessage, TaskAttachment, TASK_TRANSITIONS
from staffdesk.models.inventory import InventoryItem, InventoryItemType
from staffdesk.models.system_setting import SystemSetting
from staffdesk.models.audit_log import AuditLog
from staffdesk.models.biodata import BiodataSubmission, BiodataStatus
from staffdesk.models.employee_audit import EmployeeAudit, EmployeeAuditStatus
from staffdesk.models.growth_task import GrowthTask, GrowthTaskCompletion

__all__ = [
    "Profile",
    "Role",
    "MANAGER_ROLES",
    "SalaryInfo",
    "Attendance",
    "AttendanceStatus",
    "Suspension",
    "SuspensionStatus",
    "SUSPENSION_TRANSITIONS",
    "Project",
    "ProjectStatus",
    "Task",
    "TaskStatus",
    "TaskPriority",
    "TaskMessage",
    "TaskAttachment",
    "TASK_TRANSITIONS",
    "InventoryItem",
    "InventoryItemType",
    "SystemSetting",
    "AuditLog",
    "BiodataSubmission",
    "BiodataStatus",
    "EmployeeAudit",
    "EmployeeAuditStatus",
    "GrowthTask",
    "GrowthTaskCompletion",
]
