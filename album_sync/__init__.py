"""album-sync: pull a remote folder down over SSH, edit it, push it back."""
