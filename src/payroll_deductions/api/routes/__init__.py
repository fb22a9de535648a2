"""API routes."""

from payroll_deductions.api.routes.advances import router as advances_router
from payroll_deductions.api.routes.health import router as health_router
from payroll_deductions.api.routes.loans import router as loans_router
from payroll_deductions.api.routes.mobile_bills import router as mobile_bills_router
from payroll_deductions.api.routes.payroll import router as payroll_router
from payroll_deductions.api.routes.training import router as training_router
from payroll_deductions.api.routes.uniforms import router as uniforms_router

__all__ = [
    "advances_router",
    "health_router",
    "loans_router",
    "mobile_bills_router",
    "payroll_router",
    "training_router",
    "uniforms_router",
]
