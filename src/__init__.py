"""Recipe sharing API: accounts and recipes stored as CSV objects in S3."""
