from .user import User
from .task import Task, TaskType, TaskStatus
from .project import Project, ProjectStep, StepStatus
from .checklist import Checklist, ChecklistTemplate, ChecklistOccurrence
from .help_ticket import HelpTicket, HelpTicketStatus
from .fms_display_config import FMSDisplayConfig, DisplayMode
