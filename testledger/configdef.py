"""Testledger default configuration file

Every configuration element ever used in the program must exist here.
These defaults may be overridden in the user's config file ($XDG_CONFIG_HOME/testledgerrc)
or on the command line with --set.

Run metadata (run UUID, site, build URL, etc.) is not configured here; it is passed in by the CI
job through environment variables. See settings.py.
"""


# Base URL of the Test Ledger API. The scheme is optional; https is always used.
api_url = 'https://app-api.testledger.dev'

# Directory into which the test reporter writes its wdio-*.log files
reporter_output_dir = ''

# Directory tree holding screenshots taken during the run (empty to disable)
screenshot_dir = ''

# Directory tree holding videos recorded during the run (empty to disable)
video_dir = ''

# Whether to upload screenshots and videos after the run has been submitted
upload_artifacts = False

# Test Ledger project ID to which runs are reported
project_id = 0

# Version of the application under test, if not given by APP_VERSION or CODE_VERSION
app_version = '0.0.1'

# Whether the ledger should perform flaky test detection on this project
enable_flaky = 0

# File name prefix of the reporter log files, before the worker ID
log_file_prefix = 'wdio'

# What to do with a log file whose name doesn't contain a worker ID:
#   'strict' to abort the whole aggregation
#   'skip' to ignore that file and continue
log_name_policy = 'strict'

# Whether to write a testledger-<stage>.txt file into the output directory for every problem
write_status_files = False

# Name of the file in the output directory holding the run start time
start_file = 'testledger-start.txt'
