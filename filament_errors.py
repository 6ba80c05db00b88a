"""
Error kinds raised by the filament core.

Structural violations are programming errors in the calling merge logic.
Precondition violations flag a query that cannot be answered yet.
Degenerate geometry is never an error.
"""


class FilamentError(Exception):
    """Base class for every error raised by the filament core"""


class DuplicateMemberError(FilamentError, ValueError):
    """A section was added to a filament that already holds it"""

    def __init__(self, filament_id, section_id):
        super().__init__(f"Section #{section_id} already member of filament #{filament_id}")
        self.filament_id = filament_id
        self.section_id = section_id


class SelfIncludeError(FilamentError, ValueError):
    """A filament (or its own group) was asked to include itself"""

    def __init__(self, filament_id):
        super().__init__(f"Filament #{filament_id} cannot include itself")
        self.filament_id = filament_id


class PreconditionError(FilamentError, RuntimeError):
    """A query or mutation was issued before its preconditions were met"""


class EmptyFilamentError(PreconditionError):
    """Geometry was requested on a filament that has no member section"""

    def __init__(self, filament_id=None):
        if filament_id is None:
            message = "No section to compute geometry from"
        else:
            message = f"Filament #{filament_id} has no section"
        super().__init__(message)
        self.filament_id = filament_id
