"""Class Attendance package.

Feature modules (settings, subjects, timetable, attendance, stats, sync, ...)
sit behind a thin Flask controller layer; the scheduling and accounting rules
live in plain service/repository classes that can be used without Flask.
"""
