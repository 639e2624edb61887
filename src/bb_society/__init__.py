"""BB Society outreach management package.

Organized by feature modules (schedules, attendance, statistics, ...) with a
thin Flask controller layer over service/repository layers.
"""
