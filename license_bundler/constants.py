"""Constants for license-bundler."""

# Process exit codes
EXIT_SUCCESS = 0  # Bundle written (and subset check passed, if requested)
EXIT_ISSUES = 1  # Subset check against the previous bundle failed
EXIT_ERROR = 2  # Bundling failed due to an error

# Placeholder text for a license whose text could not be found.
# Reserved: never emitted as genuine license text.
LICENSE_NOT_FOUND_TEXT = "NOT FOUND"

# Placeholder for site-packages in license file paths so bundles compare
# across machines and virtual environments
SITE_PACKAGES_PLACEHOLDER = "$SITE_PACKAGES"
