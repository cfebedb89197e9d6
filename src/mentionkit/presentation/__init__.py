"""Terminal presentation layer built on textual and textual-autocomplete."""
