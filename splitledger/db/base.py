# Import every model so Base.metadata is complete for create_all and Alembic
from splitledger.db.session import Base  # noqa: F401
from splitledger.models.member import Member  # noqa: F401
from splitledger.models.group import Group  # noqa: F401
from splitledger.models.group_member import GroupMember  # noqa: F401
from splitledger.models.trip import Trip  # noqa: F401
from splitledger.models.expense import Expense  # noqa: F401
from splitledger.models.expense_split import ExpenseSplit  # noqa: F401
from splitledger.models.settlement import Settlement  # noqa: F401
