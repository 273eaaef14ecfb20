# Services package.
#
# A service is any object exposing some of the ten REST operations with the
# callback contract ``method(*leading_args, params, callback)``:
#
#   task_service  - in-memory tasks with a ``subtasks`` collection
#
# Services know nothing about HTTP.  They raise or call back with errors
# from ``rest_provider.errors``; status codes are decided by the REST layer.
