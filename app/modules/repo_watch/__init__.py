"""New-repository watcher: detect repositories added since the last run and notify."""
