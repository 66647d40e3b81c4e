"""General utilities: exceptions, integer math and progress bars."""
