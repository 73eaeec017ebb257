"""File writers for extracted geometry."""
