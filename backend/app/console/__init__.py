"""Dashboard console: async view models over the portal API."""

from app.console.client import ConsoleClient, RequestFailed, Session
from app.console.join import JoinForm
from app.console.members import MemberDirectory
from app.console.notices import Notice, Notifier
from app.console.review import ReviewQueue
from app.console.roster import BosRoster

__all__ = [
	"BosRoster",
	"ConsoleClient",
	"JoinForm",
	"MemberDirectory",
	"Notice",
	"Notifier",
	"RequestFailed",
	"ReviewQueue",
	"Session",
]
