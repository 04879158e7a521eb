"""Field Check-In package.

Feature modules (geo, checkins, clients, dashboard, reports, users) with a thin
Flask controller layer on top of service/repository layers.
"""
