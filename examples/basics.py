from rich.console import Console

from pathstore import PathStore, render_store

store = PathStore()

# ------------------------------------------------------------------------------------------------

print()
print("=" * 100)
print("Creating a container")
print("-" * 100)
print()

# A container is a named root of nested data. The initial value is copied.
store.init_container("USER", {"name": "Alice", "location": {"latitude": 1, "longitude": 2}})

print(store.get("USER"))
print(store.get("USER.location.latitude"))
print(store.get("USER.does.not.exist"))  # Missing paths read as None

# ------------------------------------------------------------------------------------------------

print()
print("=" * 100)
print("Listening for changes")
print("-" * 100)
print()

log_latitude = lambda old, new: print(f"latitude: {old} -> {new}")
log_location = lambda old, new: print(f"location: {old} -> {new}")

store.on_change("USER.location.latitude", log_latitude)
store.on_change("USER.location", log_location)

# Parent listeners fire first, then the deeper ones.
store.set("USER.location.latitude", 10)

# Setting an equal value does not notify anyone.
store.set("USER.location.latitude", 10)

store.remove_change_callback("USER.location.latitude", log_latitude)
store.set("USER.location.latitude", 20)  # Only the location listener fires

# ------------------------------------------------------------------------------------------------

print()
print("=" * 100)
print("Merge versus overwrite")
print("-" * 100)
print()

# Mappings are shallow-merged into existing mappings by default...
store.set("USER.location", {"latitude": 30})
print(store.get("USER.location"))

# ...unless overwrite is requested.
store.set("USER.location", {"latitude": 40}, overwrite=True)
print(store.get("USER.location"))

# ------------------------------------------------------------------------------------------------

print()
print("=" * 100)
print("Inspecting the store")
print("-" * 100)
print()

Console().print(render_store(store))
