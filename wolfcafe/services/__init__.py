"""Services used by the items grid."""
