from .auth import AuthResponse, LoginRequest, RegisterRequest
from .user import User
from .address import Address
from .cart import Cart, CartWithSummary
from .order import Order
from .pagination import Page, PaginationParams
