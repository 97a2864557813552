"""Fake service collaborators and record builders shared by the tests."""

from datetime import datetime, timedelta

from pytz import timezone

from vp_metrics.serviceclient import Session, UsageEvent, User

T0 = datetime(2026, 10, 1, 12, 0, 0, tzinfo=timezone("UTC"))


def event(user_id, start, viewed, minutes=0):
    return UsageEvent(user_id, float(start), float(viewed), T0 + timedelta(minutes=minutes))


def session(session_id, name="Lecture", folder="Biology 101", duration=1000.0):
    return Session(session_id, name, folder, duration)


def _page(items, page_number, page_size):
    start = page_number * page_size
    return list(items[start:start + page_size])


class FakeClient:
    """In-memory stand-in for the video platform services.

    sessions: list of Session, newest first
    usage: dict of session_id -> list of UsageEvent, or an Exception to raise
    users: dict of user_id -> display name
    """

    def __init__(self, sessions=(), usage=None, users=None, session_total=None,
                 fail_session_page=None, fail_users=False):
        self.sessions = list(sessions)
        self.usage = usage or {}
        self.users = users or {}
        self.session_total = session_total
        self.fail_session_page = fail_session_page
        self.fail_users = fail_users
        self.session_calls = []
        self.usage_calls = []
        self.user_calls = []

    def listSessions(self, page_number, page_size, sort_by="Date", sort_increasing=False):
        self.session_calls.append((page_number, page_size, sort_by, sort_increasing))
        if self.fail_session_page is not None and page_number == self.fail_session_page:
            raise RuntimeError("session list unavailable")
        total = self.session_total if self.session_total is not None else len(self.sessions)
        return _page(self.sessions, page_number, page_size), total

    def getSessionDetailedUsage(self, session_id, page_number, page_size, begin_date, end_date):
        self.usage_calls.append((session_id, page_number, page_size, begin_date, end_date))
        events = self.usage.get(session_id, [])
        if isinstance(events, Exception):
            raise events
        return _page(events, page_number, page_size), len(events)

    def getUsers(self, user_ids):
        self.user_calls.append(list(user_ids))
        if self.fail_users:
            raise RuntimeError("user service unavailable")
        return [User(user_id, self.users[user_id]) for user_id in user_ids if user_id in self.users]
