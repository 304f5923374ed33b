"""Actions handled by the dispatcher.

- Action: Base class owning the execution pipeline
- Login, Logout: Session actions
- Reply: Posting action
- Home, LoginPage, ViewConversation, ViewPost: Page actions
"""

from actiondispatch.actions.base import Action
from actiondispatch.actions.login import Login, Logout
from actiondispatch.actions.pages import Home, LoginPage, ViewConversation, ViewPost
from actiondispatch.actions.reply import Reply

__all__ = [
    "Action",
    "Login",
    "Logout",
    "Reply",
    "Home",
    "LoginPage",
    "ViewConversation",
    "ViewPost",
]
