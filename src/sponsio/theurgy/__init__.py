"""
Theurgy - Command implementations for Sponsio.

Each module corresponds to a top-level CLI command:
- proposal: Build an add_proposal payload or transaction for a portal
- project:  Build a NEAR Catalog entry payload or transaction
- view:     Call a read-only contract method
- status:   Show the signer's next nonce and the latest block
"""
