"""Task tracking routes package.

This package organizes the runner-tracking routes into logical submodules:
- location: Runner position reports, latest position and trail
- proximity: Proximity alerts for a task
- completion: Completion code generation, lookup and redemption
- workflow: Task lifecycle actions owned here (start, cancel)
- helpers: Shared request parsing
"""

from flask import Blueprint

tasks_bp = Blueprint('tasks', __name__)

# Import and register all route modules
from errands.routes.tasks import location  # noqa: E402,F401
from errands.routes.tasks import proximity  # noqa: E402,F401
from errands.routes.tasks import completion  # noqa: E402,F401
from errands.routes.tasks import workflow  # noqa: E402,F401
