"""Validators for probe responses: HTTP status, regex and data integrity."""