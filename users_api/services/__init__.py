# Services package init
"""
Users API: Services Layer
===========================

What:  The two capabilities route handlers depend on.

Service Inventory:
    - UserStore (user_store.py): parameterized CRUD statements over the single
      store connection
    - EventLogger (event_logger.py): leveled event log with console and
      remote sinks; NullEventLogger discards events
    - Remote sink (remote_sink.py): bounded, fire-and-forget shipping of
      event records to Logtail

Both are constructed once by the application factory and reach handlers
through users_api.dependencies.
"""
