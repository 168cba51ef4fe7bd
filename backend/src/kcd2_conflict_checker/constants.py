WORKSHOP_APP_ID = "1771300"
GAME_FOLDER_NAME = "KingdomComeDeliverance2"

LOCAL_MODS_DIR = "Mods"
MANIFEST_FILENAME = "mod.manifest"
PACKAGE_EXTENSION = ".pak"

# Folder names containing this marker are never treated as mods.
SKIP_FOLDER_MARKER = "ptf"
# Packages made only of XML files carrying this marker hold mod metadata.
METADATA_FILE_MARKER = "__"

STEAM_REGISTRY_KEYS = (
    r"SOFTWARE\WOW6432Node\Valve\Steam",
    r"SOFTWARE\Valve\Steam",
)
