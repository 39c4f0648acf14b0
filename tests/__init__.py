# Tests for the urlscan client
