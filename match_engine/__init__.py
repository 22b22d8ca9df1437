"""Student/listing match engine."""
