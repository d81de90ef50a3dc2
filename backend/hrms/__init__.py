"""HRMS backend: roles, org hierarchy, salary breakups and event-driven notifications"""
