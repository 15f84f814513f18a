from models.site import Site
from models.site_host import SiteHost
from models.account import Account, AccountRole
from models.membership import Membership

# Logging
from models.log_item import LogItem
