"""Workflow manager — employees, projects, clients, attendance, payroll and approvals."""
