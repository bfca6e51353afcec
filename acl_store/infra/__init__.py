"""Infrastructure helpers for host applications embedding the ACL store."""
