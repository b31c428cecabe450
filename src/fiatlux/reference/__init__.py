"""Reference parsing and reference links."""
