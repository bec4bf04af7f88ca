# Index for the request/response schemas
from __future__ import annotations
__all__ = []
from .base import APIModel, PatchModel
__all__ += ['APIModel','PatchModel']
from .users import UserOut, RegisterIn, LoginIn, TokenOut, ChangePasswordIn
__all__ += ['UserOut','RegisterIn','LoginIn','TokenOut','ChangePasswordIn']
from .students import AttendanceRecord, StudentCreate, StudentUpdate, StudentOut, AttendanceIn, ClassAttendanceEntry, ClassAttendanceIn, AwardPointsIn
__all__ += ['AttendanceRecord','StudentCreate','StudentUpdate','StudentOut','AttendanceIn','ClassAttendanceEntry','ClassAttendanceIn','AwardPointsIn']
from .teachers import TeacherCreate, TeacherUpdate, TeacherOut
__all__ += ['TeacherCreate','TeacherUpdate','TeacherOut']
from .subjects import SubjectCreate, SubjectUpdate, SubjectOut
__all__ += ['SubjectCreate','SubjectUpdate','SubjectOut']
from .classes import ClassCreate, ClassUpdate, ClassOut, AssignIdsIn
__all__ += ['ClassCreate','ClassUpdate','ClassOut','AssignIdsIn']
from .grades import GradeCreate, GradeUpdate, GradeOut, SubmitToAdminIn
__all__ += ['GradeCreate','GradeUpdate','GradeOut','SubmitToAdminIn']
from .points import PointTransactionOut, PointRuleParameters, PointRuleCreate, PointRuleUpdate, PointRuleOut, SuggestionOut, GenerateSuggestionsIn, GenerateSuggestionsOut
__all__ += ['PointTransactionOut','PointRuleParameters','PointRuleCreate','PointRuleUpdate','PointRuleOut','SuggestionOut','GenerateSuggestionsIn','GenerateSuggestionsOut']
from .messages import MessageCreate, MessageOut, UnreadCountOut
__all__ += ['MessageCreate','MessageOut','UnreadCountOut']
from .events import EventCreate, EventUpdate, EventOut, CalendarEventOut, AcademicTermOut, CurrentTermOut, CalendarImportOut
__all__ += ['EventCreate','EventUpdate','EventOut','CalendarEventOut','AcademicTermOut','CurrentTermOut','CalendarImportOut']
from .resources import ResourceOut
__all__ += ['ResourceOut']
from .reports import LeaderboardEntry, MoEReportOut, DashboardOut, GradeScaleEntry, FinalGradeIn, FinalGradeOut, ResultsIn, EligibilityOut, DivisionOut
__all__ += ['LeaderboardEntry','MoEReportOut','DashboardOut','GradeScaleEntry','FinalGradeIn','FinalGradeOut','ResultsIn','EligibilityOut','DivisionOut']
