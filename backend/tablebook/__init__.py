"""Restaurant table-reservation backend."""
