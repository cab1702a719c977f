"""Terminal board for workflows in the devflow store."""
