"""Time-clock and weekly timesheet service.

Organized by feature modules (clock, timesheets, leave, work_items) with a
thin Flask JSON controller layer over service/repository layers.
"""
