"""
Services.

Business logic layer over the Copperx API. Import services from their
modules directly.
"""
