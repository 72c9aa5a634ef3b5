"""CustomTkinter front end: reader window and floating tracker panel."""
