"""
Service layer.

Services hold the business rules and talk to the store object they
were constructed with; API handlers only translate their results into
HTTP responses.
"""
