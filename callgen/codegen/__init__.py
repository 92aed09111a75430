"""Code generation for callgen: naming, planning, emission and rendering."""
