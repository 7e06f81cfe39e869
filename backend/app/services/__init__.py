"""Services package for the student performance analytics engine."""
