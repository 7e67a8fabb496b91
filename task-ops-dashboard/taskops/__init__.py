"""Task operations dashboard.

Fetches task records from the tasks table, filters, paginates and classifies
them (BOH/FOH) for human triage, and exports the filtered view as CSV.
"""
