"""
FastAPI Backend for Fortune Oracle

Provides RESTful API endpoints for Bazi charts, five-element scores, I Ching
casting, daily fortune, astrology, numerology and AI narrative analysis.
"""
import random
import time
from datetime import date
from pathlib import Path
from typing import List, Optional

from dotenv import load_dotenv
from fastapi import Depends, FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, Field

from astro_utils import get_astrology_chart, get_numerology_reading, get_sun_sign
from bazi_utils import (
    build_analysis_prompt,
    build_daily_prompt,
    build_oracle_prompt,
    compose_daily_fortune,
    draw_fortune_stick,
    draw_hexagram_svg,
    get_tai_sui_details,
    get_tai_sui_remedies,
)
from db_utils import ProfileRepository, get_profile_repository
from ganzhi_data import BRANCH_TO_ZODIAC, InvalidTokenError, get_stem_wuxing
from llm_client import NarrativeService, NarrativeServiceError, get_narrative_service, is_safe_input, log_perf
from logic import (
    DateOutOfRangeError,
    SexagenaryCalendar,
    WuxingRelationCalculator,
    ZhouyiCalculator,
    calculate_bazi,
    calculate_energy_score,
    get_hexagram_info,
)
from tarot_utils import draw_tarot_cards, draw_tarot_spread
from text_utils import clean_markdown_for_display

load_dotenv(dotenv_path=Path(__file__).resolve().parent / ".env")


# --- Pydantic Models for Request/Response ---

class BirthData(BaseModel):
    """Birth data for Bazi calculation."""
    birth_year: int = Field(..., ge=1900, le=2100, description="Year of birth (e.g., 1990)")
    month: int = Field(..., ge=1, le=12, description="Month of birth (1-12)")
    day: int = Field(..., ge=1, le=31, description="Day of birth (1-31)")
    hour: Optional[int] = Field(None, ge=0, le=23, description="Hour of birth (0-23), 子时 when unknown")
    gender: Optional[str] = Field(None, pattern="^(男|女)$", description="Gender (男/女)")


class ChartResponse(BaseModel):
    """Response for /api/chart endpoint."""
    bazi: str
    year_pillar: dict
    month_pillar: dict
    day_pillar: dict
    hour_pillar: dict
    day_master: str
    day_master_wuxing: str
    zodiac: str


class WuxingRequest(BaseModel):
    """Day master against a current stem (today's when omitted)."""
    day_stem: str = Field(..., description="Day Master stem (日主天干)")
    current_stem: Optional[str] = Field(None, description="Current stem (流日天干)")
    current_branch: Optional[str] = Field(None, description="Current branch (流日地支)")
    target_date: Optional[date] = Field(None, description="Date used when current stem is omitted")


class CastRequest(BaseModel):
    """Request for /api/iching/cast endpoint."""
    seed: Optional[int] = Field(None, description="Seed for a reproducible cast")


class FortuneRequest(BaseModel):
    """Request for /api/fortune endpoint."""
    birth: BirthData
    target_date: Optional[date] = Field(None, description="Fortune date, today when omitted")
    stick_seed: Optional[int] = Field(None, description="Seed for the fortune stick")


class AnalyzeRequest(BaseModel):
    """Request for /api/analyze endpoint."""
    type: str = Field("bazi", pattern="^(bazi|iching|daily)$", description="Divination type")
    birth: BirthData
    question: Optional[str] = Field(None, max_length=200, description="Question for I Ching analysis")
    seed: Optional[int] = Field(None, description="Seed for the I Ching cast")
    target_date: Optional[date] = None


class AnalyzeResponse(BaseModel):
    type: str
    markdown_content: str
    html_content: str


class AstrologyRequest(BaseModel):
    birth: BirthData
    birth_time: Optional[str] = Field(None, description="HH:MM")
    target_date: Optional[date] = Field(None, description="Date of the daily horoscope, today when omitted")


class TarotRequest(BaseModel):
    """Request for /api/tarot endpoint."""
    count: int = Field(1, ge=1, le=10, description="Number of cards to draw")
    spread: Optional[str] = Field(None, pattern="^(daily|three_card)$", description="Spread; overrides count")
    exclude_ids: List[int] = Field(default_factory=list, description="Cards already drawn")
    seed: Optional[int] = Field(None, description="Seed for a reproducible draw")


class NumerologyRequest(BaseModel):
    birth: BirthData
    name: str = Field("", max_length=100)


class ProfileData(BaseModel):
    """A stored birth profile."""
    profile_id: str = Field(..., min_length=1, max_length=64)
    gender: Optional[str] = Field(None, pattern="^(男|女)$")
    birth_year: int = Field(..., ge=1900, le=2100)
    birth_month: int = Field(..., ge=1, le=12)
    birth_day: int = Field(..., ge=1, le=31)
    birth_hour: Optional[str] = None
    city: Optional[str] = None
    is_lunar: bool = False
    session_data: Optional[str] = None


# --- FastAPI App Initialization ---

app = FastAPI(
    title="命理大师 API",
    description="八字排盘、五行能量、周易起卦、每日运势与 AI 解读",
    version="v0.7.0",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

sexagenary_calendar = SexagenaryCalendar()
wuxing_calc = WuxingRelationCalculator()


# --- Helper Functions ---

def http_error(e: Exception, context: str) -> HTTPException:
    """Map domain errors to HTTP status codes."""
    if isinstance(e, InvalidTokenError):
        status = 400
    elif isinstance(e, DateOutOfRangeError):
        status = 422
    elif isinstance(e, ValueError):
        status = 400
    elif isinstance(e, NarrativeServiceError):
        status = 502
    else:
        status = 500
    print(f"ERROR: {context}: {e}")
    return HTTPException(status_code=status, detail=f"{context} error: {str(e)}")


def to_date(data: BirthData) -> date:
    try:
        return date(data.birth_year, data.month, data.day)
    except ValueError as e:
        raise DateOutOfRangeError(f"无效日期 {data.birth_year}-{data.month}-{data.day}: {e}") from e


def make_zhouyi(seed: Optional[int]) -> ZhouyiCalculator:
    return ZhouyiCalculator(random.Random(seed) if seed is not None else None)


def hexagram_payload(hexagram) -> dict:
    payload = hexagram.to_dict()
    payload["info"] = get_hexagram_info(hexagram.number)
    payload["svg"] = draw_hexagram_svg(hexagram)
    return payload


# --- API Endpoints ---

@app.get("/")
async def root():
    """Health check endpoint."""
    return {"status": "ok", "message": "命理大师 API is running"}


@app.post("/api/chart", response_model=ChartResponse)
async def get_bazi_chart(data: BirthData):
    """Calculate Bazi Four Pillars without LLM interpretation."""
    try:
        bazi_str, pillars = calculate_bazi(data.birth_year, data.month, data.day, data.hour)
        chart = pillars.to_dict()
        return ChartResponse(bazi=bazi_str, zodiac=BRANCH_TO_ZODIAC[pillars.year.branch], **chart)
    except Exception as e:
        raise http_error(e, "Bazi calculation")


@app.post("/api/wuxing")
async def get_wuxing_scores(request: WuxingRequest):
    """Five-element relation, radar scores and energy value."""
    try:
        current_stem, current_branch = request.current_stem, request.current_branch
        if current_stem is None:
            today = sexagenary_calendar.get_day_ganzhi(request.target_date or date.today())
            current_stem, current_branch = today.stem, current_branch or today.branch

        day_wx = get_stem_wuxing(request.day_stem)
        current_wx = get_stem_wuxing(current_stem)
        relation = wuxing_calc.relate(day_wx, current_wx)
        result = {
            "day_stem": request.day_stem,
            "day_wuxing": day_wx,
            "current_stem": current_stem,
            "current_wuxing": current_wx,
            "relation": relation.to_dict(),
            "scores": wuxing_calc.score(50, relation),
        }
        if current_branch is not None:
            result["current_branch"] = current_branch
            result["energy"] = calculate_energy_score(request.day_stem, current_stem, current_branch)
        return result
    except Exception as e:
        raise http_error(e, "Wuxing")


@app.post("/api/iching/cast")
async def cast_iching(request: CastRequest):
    """Three-coin cast of six lines, bottom line first."""
    zhouyi = make_zhouyi(request.seed)
    hexagram = zhouyi.cast_hexagram()
    payload = hexagram_payload(hexagram)
    payload["display"] = zhouyi.format_hexagram_display(hexagram)
    return payload


@app.post("/api/iching/meihua")
async def cast_meihua(data: BirthData):
    """Plum-blossom hexagram from the birth date."""
    try:
        hexagram = ZhouyiCalculator().cast_meihua(to_date(data))
        return hexagram_payload(hexagram)
    except Exception as e:
        raise http_error(e, "Meihua")


@app.post("/api/fortune")
async def get_daily_fortune(request: FortuneRequest):
    """Daily fortune: eastern & western text, radar, booster, avoidance, tai sui, fortune stick."""
    start_time = time.monotonic()
    try:
        birth_date = to_date(request.birth)
        _, pillars = calculate_bazi(birth_date.year, birth_date.month, birth_date.day, request.birth.hour)
        today = request.target_date or date.today()
        today_pillars = sexagenary_calendar.get_four_pillars(today)

        fortune = compose_daily_fortune(pillars.day_master, today_pillars, birth_date, today)
        zodiac = BRANCH_TO_ZODIAC[pillars.year.branch]
        fortune["date"] = today.isoformat()
        fortune["tai_sui"] = {
            "year": today_pillars.year.full,
            "zodiacs": get_tai_sui_details(today_pillars.year.branch),
            "user_zodiac": zodiac,
            "remedies": get_tai_sui_remedies(zodiac, today_pillars.year.branch),
        }
        fortune["stick"] = draw_fortune_stick(seed=request.stick_seed)
    except Exception as e:
        raise http_error(e, "Fortune")

    log_perf(f"[PERF] fortune total_ms={int((time.monotonic() - start_time) * 1000)}")
    return fortune


@app.post("/api/analyze", response_model=AnalyzeResponse)
async def analyze(request: AnalyzeRequest, service: NarrativeService = Depends(get_narrative_service)):
    """
    AI narrative analysis. The prompt is built from computed values and sent
    to the configured LLM candidates in order.
    """
    if not service.is_configured:
        raise HTTPException(status_code=500, detail="LLM_API_KEY not configured")

    if request.question and not is_safe_input(request.question):
        raise HTTPException(status_code=400, detail="Invalid input detected")

    start_time = time.monotonic()
    try:
        birth_date = to_date(request.birth)
        _, pillars = calculate_bazi(birth_date.year, birth_date.month, birth_date.day, request.birth.hour)

        if request.type == "iching":
            hexagram = make_zhouyi(request.seed).cast_hexagram()
            prompt = build_oracle_prompt(request.question or "请解读此卦", hexagram, pillars)
        elif request.type == "daily":
            today = request.target_date or date.today()
            fortune = compose_daily_fortune(
                pillars.day_master, sexagenary_calendar.get_four_pillars(today), birth_date, today
            )
            prompt = build_daily_prompt(fortune, pillars.day_master)
        else:
            prompt = build_analysis_prompt(
                pillars, birth_date, request.birth.gender or "未知", get_sun_sign(birth_date)["name"]
            )

        content = service.generate(prompt)
    except Exception as e:
        raise http_error(e, "Analysis")

    log_perf(f"[PERF] analyze type={request.type} total_ms={int((time.monotonic() - start_time) * 1000)}")
    return AnalyzeResponse(
        type=request.type,
        markdown_content=content,
        html_content=clean_markdown_for_display(content),
    )


@app.post("/api/astrology")
async def get_astrology(request: AstrologyRequest):
    try:
        return get_astrology_chart(to_date(request.birth), request.birth_time, request.target_date)
    except Exception as e:
        raise http_error(e, "Astrology")


@app.post("/api/numerology")
async def get_numerology(request: NumerologyRequest):
    try:
        return get_numerology_reading(to_date(request.birth), request.name)
    except Exception as e:
        raise http_error(e, "Numerology")


@app.post("/api/tarot")
async def draw_tarot(request: TarotRequest):
    """Draw tarot cards without replacement, each upright or reversed."""
    rng = random.Random(request.seed) if request.seed is not None else None
    try:
        if request.spread:
            cards = draw_tarot_spread(request.spread, request.exclude_ids, rng)
        else:
            cards = draw_tarot_cards(request.count, request.exclude_ids, rng)
    except Exception as e:
        raise http_error(e, "Tarot")
    return {"spread": request.spread, "cards": cards}


@app.get("/api/profiles")
async def list_profiles(repo: ProfileRepository = Depends(get_profile_repository)) -> List[dict]:
    return repo.list()


@app.post("/api/profiles", status_code=201)
async def save_profile(profile: ProfileData, repo: ProfileRepository = Depends(get_profile_repository)):
    if not repo.save(profile.model_dump()):
        raise HTTPException(status_code=500, detail="保存失败")
    return repo.load(profile.profile_id)


@app.get("/api/profiles/{profile_id}")
async def get_profile(profile_id: str, repo: ProfileRepository = Depends(get_profile_repository)):
    profile = repo.load(profile_id)
    if profile is None:
        raise HTTPException(status_code=404, detail=f"Profile {profile_id} not found")
    return profile


@app.delete("/api/profiles/{profile_id}")
async def delete_profile(profile_id: str, repo: ProfileRepository = Depends(get_profile_repository)):
    if not repo.delete(profile_id):
        raise HTTPException(status_code=404, detail=f"Profile {profile_id} not found")
    return {"status": "deleted", "profile_id": profile_id}


# --- Run with: uvicorn main:app --reload ---
if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
