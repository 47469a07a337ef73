"""Failure cause constants attached to failed jobs."""

FILE_READ_ERROR = "file_read_error"
SUBMIT_TRANSPORT_ERROR = "submit_transport_error"
SUBMIT_HTTP_ERROR = "submit_http_error"
SUBMIT_PARSE_ERROR = "submit_parse_error"
STATUS_HTTP_ERROR = "status_http_error"
PIPELINE_STEP_FAILED = "pipeline_step_failed"
UNEXPECTED_ERROR = "unexpected_error"
