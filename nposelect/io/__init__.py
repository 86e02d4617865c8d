"""Input/output of election data in file formats.

This subpackage is structured into modules by file format. Currently the
JSON snapshot format (:mod:`nposelect.io.snapshot`) is supported; it is the
format used for persisted fixtures and for results handed to other tools.
"""
