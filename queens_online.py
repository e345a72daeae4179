"""
Online script: fully automatic solver.
It logs you into LinkedIn, reads today's Queens grid from the page and clicks the queens in.

Ready to go?
1. Running the script opens a Chrome page and logs in (set LINKEDIN_EMAIL / LINKEDIN_PASSWORD, otherwise log in by hand)
2. Click the "Start Game" button
3. See the puzzle being solved in real time
"""

import os
import re
import sys
from time import time

from bs4 import BeautifulSoup  # for HTML parsing (decoding the grid structure from the website)
from selenium import webdriver  # to interact with the browser (get HTML, click cells, etc.)
from selenium.common.exceptions import TimeoutException, WebDriverException
from selenium.webdriver.common.by import By
from selenium.webdriver.support import expected_conditions as EC
from selenium.webdriver.support.ui import WebDriverWait

from queens_board import Board, InvalidInput
from queens_solver import solution_grid, solve

# Credentials come from the environment. If unset, type them on the page (and maybe raise LOGIN_TIMEOUT)
LINKEDIN_EMAIL = os.environ.get("LINKEDIN_EMAIL")
LINKEDIN_PASSWORD = os.environ.get("LINKEDIN_PASSWORD")

LOGIN_URL = "https://www.linkedin.com/login"
GAME_URL = "https://www.linkedin.com/games/queens/"

COOKIE_TIMEOUT = 5
LOGIN_TIMEOUT = 20
GAME_TIMEOUT = 30
CELL_TIMEOUT = 10

GRID_ID = "queens-grid"
CELL_CLASS = "queens-cell-with-border"
COLOR_CLASS_PREFIX = "cell-color-"

# terminal colors, assigned to the board's color regions in sorted order
PALETTE = [
    '\033[95m',        # Purple
    '\033[33m',        # Orange
    '\033[94m',        # Blue
    '\033[92m',        # Green
    '\033[97m',        # White/Grey
    '\033[91m',        # Red
    '\033[38;5;226m',  # Bright Yellow
    '\033[38;5;94m',   # Brown
    '\033[38;5;165m',  # Pink
    '\033[96m',        # Cyan
    '\033[38;5;46m',   # Bright Green
    '\033[38;5;51m',   # Bright Blue
    '\033[38;5;208m',  # Dark Orange
    '\033[38;5;27m',   # Deep Blue
    '\033[38;5;129m',  # Magenta
    '\033[38;5;202m',  # Bright Orange
]
RESET_COLOR = '\033[0m'


def _style_dimension(style, name):
    match = re.search(rf"--{name}:\s*(\d+)", style)
    if not match:
        raise InvalidInput(f"grid style has no --{name}: {style!r}")
    return int(match.group(1))


def parse_grid_html(page_source):
    """
    Reads the board out of the game page.

    The grid div carries its size in the inline style (--rows / --cols), every cell carries its index
    in data-cell-idx and its color region as a "cell-color-<n>" class.

    Args:
    - page_source: HTML of the page (driver.page_source)

    Returns:
    - the Board, with numeric colors turned into ints
    """
    soup = BeautifulSoup(page_source, 'html.parser')

    grid = soup.find('div', id=GRID_ID)
    if grid is None:
        raise InvalidInput(f"no #{GRID_ID} element on the page")

    style = grid.get('style', '')
    rows = _style_dimension(style, 'rows')
    cols = _style_dimension(style, 'cols')

    cell_colors = {}
    for cell in grid.find_all('div', class_=CELL_CLASS):
        try:
            idx = int(cell['data-cell-idx'])
        except (KeyError, ValueError):
            raise InvalidInput(f"cell without a valid data-cell-idx: {cell}") from None

        color = None
        for class_name in cell.get('class', []):
            if class_name.startswith(COLOR_CLASS_PREFIX):
                color = class_name[len(COLOR_CLASS_PREFIX):]
                break
        if not color:
            raise InvalidInput(f"cell {idx} has no color class")

        cell_colors[idx] = int(color) if color.isdigit() else color

    return Board.from_dict({"rows": rows, "cols": cols, "idxToColor": cell_colors})


def place_queens_with_selenium(driver, solution, timeout=CELL_TIMEOUT):
    """
    Clicks the queens into the web interface.
    One click sets a cross, a second one turns it into a queen.

    Args:
    - driver: Selenium WebDriver instance.
    - solution: cell indices returned by the solver (same numbering as data-cell-idx).

    Returns:
    - the indices that could not be clicked (empty when everything went fine)
    """
    failed = []
    for idx in solution:
        cell_selector = f"div[data-cell-idx='{idx}']"
        try:
            cell_element = WebDriverWait(driver, timeout).until(
                EC.presence_of_element_located((By.CSS_SELECTOR, cell_selector))
            )
            cell_element.click()
            cell_element.click()
        except WebDriverException as e:
            print(f"Error placing queen at cell {idx}: {e}")
            failed.append(idx)
    return failed


def format_colored_grid(board, solution):
    """Render the solved board for the terminal: X for a queen, . for empty, tinted by color region."""
    try:
        ordered = sorted(board.colors)
    except TypeError:
        ordered = sorted(board.colors, key=repr)
    tint = {color: PALETTE[i % len(PALETTE)] for i, color in enumerate(ordered)}

    grid = solution_grid(board, solution)
    lines = []
    for r in range(board.rows):
        row_display = []
        for c in range(board.cols):
            color = board.color_of(board.index(r, c))
            mark = "X" if grid[r][c] == 1 else "."
            row_display.append(f"{tint[color]}{mark}{RESET_COLOR}")
        lines.append(" ".join(row_display))
    return "\n".join(lines)


def print_colored_grid(board, solution):
    print(format_colored_grid(board, solution))


def login(driver):
    driver.get(LOGIN_URL)

    try:
        accept_button = WebDriverWait(driver, COOKIE_TIMEOUT).until(
            EC.element_to_be_clickable((By.XPATH, "//button[contains(text(), 'Accept')]"))
        )
        accept_button.click()
    except TimeoutException:
        pass  # no cookie banner this time

    if LINKEDIN_EMAIL and LINKEDIN_PASSWORD:
        email_field = WebDriverWait(driver, CELL_TIMEOUT).until(
            EC.presence_of_element_located((By.ID, "username"))
        )
        email_field.send_keys(LINKEDIN_EMAIL)
        driver.find_element(By.ID, "password").send_keys(LINKEDIN_PASSWORD)
        driver.find_element(By.XPATH, "//button[@aria-label='Sign in']").click()
    else:
        print("No credentials set, please log in manually.")

    WebDriverWait(driver, LOGIN_TIMEOUT).until(EC.url_contains("linkedin.com/feed"))


def main():
    driver = webdriver.Chrome()
    try:
        login(driver)
        driver.get(GAME_URL)

        # Here you have to click the "Start Game" button whenever you feel ready
        try:
            WebDriverWait(driver, GAME_TIMEOUT).until(
                EC.visibility_of_element_located((By.ID, GRID_ID))
            )
        except TimeoutException:
            print("The game did not show up in time.")
            return 1

        start_time = time()

        try:
            board = parse_grid_html(driver.page_source)
        except InvalidInput as e:
            print(f"Could not read the grid: {e}")
            return 1

        solution = solve(board)
        if solution is None:
            print("No solution found.")
            return 1

        end_time = time()
        place_queens_with_selenium(driver, solution)
        print(f"Solution found after: {end_time - start_time:.2f} seconds")
        print_colored_grid(board, solution)

        input()  # to keep the browser open
        return 0
    finally:
        driver.quit()


if __name__ == "__main__":
    sys.exit(main())
