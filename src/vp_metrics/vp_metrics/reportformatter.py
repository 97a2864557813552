'''
Renders report rows as comma delimited text.

Commas are stripped from session and folder names, nothing else is escaped.
'''

REPORT_COLUMNS = ["Session ID", "Session Name", "Username", "% Viewed", "Last View Date", "Folder Name"]
REPORT_HEADER = ",".join(REPORT_COLUMNS) + "\n"
NO_ACTIVITY_USERNAME = "none"


def sanitizeField(value):
  if value is None:
    return ""
  return str(value).replace(",", "")


def formatTimestamp(value):
  if value is None:
    return ""
  return value.isoformat()


def _row(columns):
  return ",".join(columns) + "\n"


def formatUserRow(session, username, record):
  '''
  One row for a (session, user) pair.

  Args:
    session: Session
    username: resolved display name of the user
    record: UserCoverageRecord of the user in the session

  Returns:
    text row, newline terminated
  '''
  return _row([
    session.session_id,
    sanitizeField(session.name),
    username,
    str(record.segmentsViewed()),
    formatTimestamp(record.last_viewed),
    sanitizeField(session.folder_name),
  ])


def formatNoActivityRow(session):
  '''
  Placeholder row for a session without any usage in the reporting window.
  '''
  return _row([
    session.session_id,
    sanitizeField(session.name),
    NO_ACTIVITY_USERNAME,
    "",
    "",
    sanitizeField(session.folder_name),
  ])
