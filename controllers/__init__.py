"""Controllers module - Application-level controllers for coordinating business logic."""

from controllers.library_controller import BatchSubmission, LibraryController, SubmissionOutcome

__all__ = ["BatchSubmission", "LibraryController", "SubmissionOutcome"]
