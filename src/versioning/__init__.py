"""Version models, range parsing, selection and the use-releases service."""
