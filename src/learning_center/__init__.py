"""Learning Center Admin package.

Feature modules (packages, students, classes, requests, ...) each carry a
repository protocol, a MySQL repository, a service and a thin Flask controller.
"""
