from .user import UserLogin, UserOut, UserDesignationOut
from .tokens import Token
from .designation import DesignationList, DesignationUsers, DesignationUpdate, DesignationUpdated, DisplayConfigOut, DisplayConfigUpdate, DisplayConfigResponse
