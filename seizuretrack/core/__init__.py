"""
Core services: storage, record store, analytics, reminders and reports
"""
