"""Crew attendance kiosk package.

Feature modules (members, attendance, admin) each carry a model, a repository
protocol with its MySQL implementation, a service and a thin Flask controller.
"""
