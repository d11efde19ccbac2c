"""Shared page fixtures."""

import pytest
from bs4 import BeautifulSoup

ROSTER_HTML = """
<html>
<head><title>Roster - That's My BIS</title></head>
<body>
  <nav class="navbar"><a href="/11258/chonglers/roster">Roster</a></nav>
  <div class="dropdown-menu">
    <a class="dropdown-item" href="/11258/chonglers/c/540876/aelektra" title="Aelektra">
      <span class="fas fa-fw fa-user"></span> Profile
    </a>
    <a class="dropdown-item" href="/11258/chonglers/c/540876/aelektra/loot">Loot</a>
    <a class="dropdown-item" href="/c/create?member_id=240895">Create character</a>
  </div>
  <table>
    <tr><td><a href="/11258/chonglers/c/540876/aelektra">Aelektra</a></td></tr>
    <tr><td><a href="/11258/chonglers/c/540900/brakka" data-original-title="Brakka the Bold">Brakka</a></td></tr>
  </table>
</body>
</html>
"""

CHARACTER_HTML = """
<html>
<head><title>Aelektra - That's My BIS</title></head>
<body>
<div class="container">
  <h1><a class="text-mage" href="/11258/chonglers/c/540876/aelektra">Aelektra</a></h1>
  <ul class="list-inline">
    <li class="list-inline-item"><span class="fas fa-fw fa-magic"></span> Frost Mage</li>
    <li class="list-inline-item"><small>Night Elf</small></li>
    <li class="list-inline-item"><small>Level 80</small></li>
    <li class="list-inline-item"><small>Tailoring, Enchanting</small></li>
  </ul>

  <div class="row">
    <div class="col-12">
      <div class="wishlist">
        <div class="wishlist-title">
          <span class="text-legendary font-weight-bold">Wishlist 1</span>
        </div>
        <ol class="js-wishlist-sorted" style="display:none">
          <li value="1"><a href="https://www.wowhead.com/wotlk/item=51242" data-wowhead="item=51242&amp;domain=wotlk" class="q4">Sanctified Bloodmage Gloves</a></li>
          <li value="1"><a href="https://www.wowhead.com/wotlk/item=51242" data-wowhead="item=51242&amp;domain=wotlk" class="q4">Sanctified Bloodmage Gloves</a></li>
          <li value="2"><a href="/item/50000" data-wowhead="item=50000&amp;domain=wotlk" class="q3">Signet of Twilight</a></li>
        </ol>
        <ol class="js-wishlist-unsorted">
          <li value="1">
            <a href="https://www.wowhead.com/wotlk/item=51242" data-wowhead="item=51242&amp;domain=wotlk" class="q4">
              <span class="iconsmall"><ins style="background-image: url('https://wow.zamimg.com/images/wow/icons/small/inv_gauntlets_90.jpg');"></ins></span>
              Sanctified Bloodmage Gloves
            </a>
            <span class="text-epic">Heroic</span>
            <span class="js-timestamp-title" data-timestamp="1700000000">2 weeks ago</span>
            by <a class="text-muted" href="/u/42">Raidleader</a>
            <ul><li>Note: BiS for phase 4</li></ul>
          </li>
          <li value="2"><a href="/item/50000" data-wowhead="item=50000&amp;domain=wotlk" class="q3">Signet of Twilight</a></li>
        </ol>
      </div>
    </div>

    <div class="col-12">
      <div class="wishlist">
        <div class="wishlist-title">
          <span class="text-gold font-weight-bold">Wishlist 2</span>
        </div>
        <ol class="js-wishlist-sorted"></ol>
        <ol class="js-wishlist-unsorted"></ol>
      </div>
    </div>

    <div class="col-12">
      <div class="loot">
        <span class="text-success font-weight-bold">Loot Received</span>
        <ol>
          <li><a href="/item/40000" data-wowhead="item=40000&amp;domain=wotlk" class="q4">Bracers of the Dark Pact</a></li>
          <li><span>Deleted item</span></li>
        </ol>
      </div>
    </div>

    <div class="col-12">
      <div class="note">
        <span class="text-muted">Public Note</span>
        <div class="js-markdown-parsed">Gearing for Ulduar</div>
      </div>
    </div>
  </div>
</div>

<div class="wowhead-tooltip" data-item="51242">
  <b>Sanctified Bloodmage Gloves</b><br>
  Item Level 264<br>
  Binds when picked up<br>
  Hands<br>
  158 Armor<br>
  +90 Stamina<br>
  +95 Intellect<br>
  Durability 40 / 40<br>
  Classes: Mage<br>
  Requires Level 80
</div>
</body>
</html>
"""


@pytest.fixture
def roster_document():
    return BeautifulSoup(ROSTER_HTML, "html.parser")


@pytest.fixture
def character_document():
    return BeautifulSoup(CHARACTER_HTML, "html.parser")


@pytest.fixture
def roster_html():
    return ROSTER_HTML


@pytest.fixture
def character_html():
    return CHARACTER_HTML
