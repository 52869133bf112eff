"""netwatch - network reachability watching for device displays."""
