'''
This package builds a per user viewing coverage report for the sessions of a video platform.

The basic workflow is:

sessions = listSessions( newest first, at most session_cap )
for session in sessions:
  events = getSessionDetailedUsage( session, last window_days days )
  records = aggregate( events, session.duration )
  for user, record in records:
    emit( session, resolveUsername( user ), record )

Coverage is measured on 100 equal segments of the session timeline:

  duration = 1000s  =>  segment length = 10s
  viewing 0s - 50s  =>  segments 0 .. 4 covered

The "% Viewed" column is the number of covered segments.
'''
