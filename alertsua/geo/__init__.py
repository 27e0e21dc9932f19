"""Country outline and region location registry."""
